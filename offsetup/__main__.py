from offsetup.main import main

main()
