#!/usr/bin/env python3
from foliogen.cli import main

if __name__ == "__main__":
    main()
