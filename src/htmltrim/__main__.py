from htmltrim.cli import main

main()
