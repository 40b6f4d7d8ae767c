"""Core framework components for FlapCube."""

from .state import GameState, StateMachine
from .events import EventBus, Event, EventType

__all__ = ["GameState", "StateMachine", "EventBus", "Event", "EventType"]
