from sync_bridge.cli import main

main()
