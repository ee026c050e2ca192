from catan_layout.cli import main

if __name__ == "__main__":
    main()
