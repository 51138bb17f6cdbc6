"""Allows running the driver with ``python -m vdb_ci``"""
from vdb_ci.main import main

if __name__ == "__main__":
    main()
