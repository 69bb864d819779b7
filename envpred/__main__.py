from envpred.run import main

main()
