"""Constants for the Snowflake Account Operator."""

# API Group
API_GROUP = "operator.dataverse.redhat.com"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_SNOWFLAKE_ACCOUNT = "SnowflakeAccount"
PLURAL_SNOWFLAKE_ACCOUNTS = "snowflakeaccounts"

# Labels
LABEL_NAME = "app.kubernetes.io/name"
LABEL_MANAGED_BY = "app.kubernetes.io/managed-by"
LABEL_INSTANCE = "app.kubernetes.io/instance"
LABEL_NAME_VALUE = "snowflake-account"
LABEL_MANAGED_BY_VALUE = "snowflake-operator"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Field Manager
FIELD_MANAGER = "snowflake-operator"
CONTROLLER_NAME = "snowflake-operator"

# Account defaults
ACCOUNT_NAME_PREFIX = "SF"
ADMIN_NAME_PREFIX = "admin_"
ADMIN_FIRST_NAME = "Admin"
ADMIN_LAST_NAME = "User"
EMAIL_DOMAIN = "example.com"
ACCOUNT_REGION = "AWS_US_WEST_2"
ACCOUNT_EDITION = "ENTERPRISE"
ACCOUNT_COMMENT = "Created by Kubernetes Operator"
ACCOUNT_URL_TEMPLATE = "https://{account_name}.snowflakecomputing.com"
DROP_GRACE_PERIOD_DAYS = 3
ACCOUNT_OPERATION_TIMEOUT_SECONDS = 120

# Secret
SECRET_NAME_SUFFIX = "-creds"
SECRET_KEY_ACCOUNT_NAME = "accountName"
SECRET_KEY_ADMIN_NAME = "adminName"
SECRET_KEY_ADMIN_PASSWORD = "adminPassword"
SECRET_KEY_EMAIL = "email"
SECRET_KEY_REGION = "region"
SECRET_KEY_EDITION = "edition"
SECRET_KEY_ACCOUNT_URL = "accountURL"

# Duration
DEFAULT_DURATION = "2m"

# Org credentials environment
ENV_ORG_USERNAME = "SNOWFLAKE_ORG_USERNAME"
ENV_ORG_PASSWORD = "SNOWFLAKE_ORG_PASSWORD"
ENV_ORG_ACCOUNT = "SNOWFLAKE_ORG_ACCOUNT"
ENV_ORG_ROLE = "SNOWFLAKE_ORG_ROLE"
DEFAULT_ORG_ROLE = "ORGADMIN"

# Condition Types
COND_READY = "Ready"
COND_CREATION_FAILED = "CreationFailed"

# Status messages
MESSAGE_ACCOUNT_CREATED = "Snowflake account created successfully"

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_ACCOUNT_CREATED = "AccountCreated"
EVENT_REASON_ACCOUNT_DELETED = "AccountDeleted"
EVENT_REASON_DURATION_EXPIRED = "DurationExpired"
