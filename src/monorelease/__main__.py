from monorelease.cli import main

main()
