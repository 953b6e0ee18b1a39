from impact_sim.app import main

main()
