from relay_failover.main import main

if __name__ == "__main__":
    main()
