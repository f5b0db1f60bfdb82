OPERATOR_LOGIN_URL = "/api/v1/auth/operator/login"
TENANT_LOGIN_URL = "/api/v1/auth/tenant/login"

TENANTS_URL = "/api/v1/tenants"
TENANT_URL = "/api/v1/tenants/{tenant_id}"
EVENT_SETTINGS_URL = "/api/v1/settings"
