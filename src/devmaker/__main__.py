from devmaker.cli import main

main()
