"""Order processing core: transactions, order lifecycle, error taxonomy"""
