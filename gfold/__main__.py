from gfold.cli.app import main

main()
