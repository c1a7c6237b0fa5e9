"""
wownow: current World of Warcraft versions from the Blizzard TACT service.

Install and run::

    pip install -e .
    wownow
    wownow --no-pretty --product wow
"""

__version__ = "0.3.0"
