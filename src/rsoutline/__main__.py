from rsoutline.cli import main

main()
