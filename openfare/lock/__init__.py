"""OpenFare lock file data: prices, frequencies, conditions, payees and plans."""