from cdk_constructs.database.infrastructure import PostgresDatabase, sanitize_db_name
from cdk_constructs.database.models import DatabaseInputParameters, DatabaseOutputParameters
