from simultaneous_kelly.cli import main

main()
