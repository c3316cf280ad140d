import os

# Define configuration
DEFAULT_HELM_REPO_URL = "https://kubernetes-charts.storage.googleapis.com/index.yaml"
KS_BINARY = os.environ.get("KS_BINARY", "ks")
RENDER_TIMEOUT = 15
# Parsed by argparse so a bad value is reported as a usage error
KS_VERIFY_TIMEOUT = os.environ.get("KS_VERIFY_TIMEOUT", str(RENDER_TIMEOUT))

WORKSPACE_PREFIX = "ks-verify-helm-"
APP_NAME_LENGTH = 6

# Registry name used for the chart repository inside the ks app
HELM_REGISTRY_NAME = "helm"

# Per-chart outcomes
STATUS_SUCCESS = "SUCCESS"
STATUS_GENERATE_ERROR = "GENERATE_ERROR"
STATUS_SHOW_ERROR = "SHOW_ERROR"
STATUS_TIMEOUT = "TIMEOUT"

# Error categories
ERROR_CATEGORIES = {
    "PACKAGE_ERROR": "Chart package could not be found or installed",
    "TEMPLATE_ERROR": "Helm template rendering failed",
    "YAML_ERROR": "YAML parsing or syntax error",
    "REQUIRED_VALUE_ERROR": "Required chart value is missing",
    "KUBERNETES_VERSION_ERROR": "Kubernetes version compatibility error",
    "DEPRECATED_ERROR": "Chart is deprecated",
    "TIMEOUT_ERROR": "Processing timed out",
    "UNKNOWN_ERROR": "Unclassified error",
}
