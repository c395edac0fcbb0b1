"""Fleet status board: aircraft store, query service, filters and views."""
