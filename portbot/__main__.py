from portbot.cli.app import main

main()
