from keysmith.console.cli import main

main()
