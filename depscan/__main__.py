from depscan.cli import main

main()
