from models.db_storage import DBStorage

# process-wide storage; the app factory configures and reloads it
storage = DBStorage()
