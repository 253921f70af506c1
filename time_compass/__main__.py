from time_compass.app import main

main()
