from vhostctl.main import main

main()
