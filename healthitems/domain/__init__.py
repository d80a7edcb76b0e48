"""Value types shared by the item catalogue and the XML codec behind them."""
