from cocommit.cli import main

main()
