from resting.app import main

main()
