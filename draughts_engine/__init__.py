"""AlphaBeast: alpha-beta move selection for international draughts."""
