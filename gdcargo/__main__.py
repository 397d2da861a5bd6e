from gdcargo.cli import main

main()
