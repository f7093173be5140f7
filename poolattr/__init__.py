"""poolattr: IKE mode-config attribute management for address pool databases."""
