"""Wire schemas shared by the record tool and the selector API."""
