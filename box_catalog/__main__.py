from box_catalog.main import main

main()
