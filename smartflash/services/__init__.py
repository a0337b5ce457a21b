"""Services package for the REST API, credential storage, notifications and study sessions."""
