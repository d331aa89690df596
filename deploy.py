"""
Contract Deployment Wrapper
Prints a banner and hands the command line to the deployer CLI
"""

import sys

from deployer.cli import main

BANNER = "Fusion Contract Deployment"


if __name__ == "__main__":
    print("=" * 70)
    print(BANNER)
    print("=" * 70)
    print()

    sys.exit(main(sys.argv[1:]))
