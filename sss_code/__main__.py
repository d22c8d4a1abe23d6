from sss_code.cli.main import main

if __name__ == "__main__":
    main()
