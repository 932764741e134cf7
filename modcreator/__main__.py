from modcreator.pipeline import main

main()
