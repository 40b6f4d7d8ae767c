from flapcube.main import main

main()
