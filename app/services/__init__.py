# Room and message services; every call takes the database and caller id explicitly
