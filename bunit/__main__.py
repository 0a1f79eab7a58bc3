from bunit.main import main

main()
