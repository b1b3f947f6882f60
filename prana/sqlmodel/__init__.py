"""Reading database schema metadata and describing it as models and field tags."""