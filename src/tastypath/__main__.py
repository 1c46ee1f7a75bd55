from tastypath.cli import main

main()
