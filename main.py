"""
Booking client entry point.

Usage:
    python main.py barbers
    python main.py book --service-variation-id ... --team-member-id ... --start-at ...
"""

from barbershop.cli import main

if __name__ == "__main__":
    main()
