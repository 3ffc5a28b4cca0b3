from healthhawk.main import main

main()
