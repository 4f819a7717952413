"""Host adapters embedding the metadata field in concrete UI toolkits."""
