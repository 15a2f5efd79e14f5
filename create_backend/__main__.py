from create_backend.cli import main

main()
