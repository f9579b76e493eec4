"""Constants for the Secret Spreader operator."""

# API Group
API_GROUP = "secretspreading.fitzek.eu"

# Resource Kinds
KIND_SECRET = "Secret"
SECRET_API_VERSION = "v1"

# Annotations
ANNOTATION_TARGET_NAMESPACE = "eu.fitzek.spread.target-namespace"

# Labels
LABEL_OWNER = "eu.fitzek.spread.owner"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Target directive
WILDCARD_NAMESPACES = "*"
NAMESPACE_SEPARATOR = ","

# Field Manager
FIELD_MANAGER = "secret-spreader"
CONTROLLER_NAME = "secret-spreader"

# Re-queue intervals (seconds)
IDLE_REQUEUE_SECONDS = 300
SYNC_REQUEUE_SECONDS = 60
ERROR_BACKOFF_SECONDS = 5

# Patch content type
MERGE_PATCH_CONTENT_TYPE = "application/merge-patch+json"

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_REPLICA_CREATED = "ReplicaCreated"
EVENT_REASON_REPLICA_UPDATED = "ReplicaUpdated"
EVENT_REASON_FOREIGN_SKIPPED = "ForeignSecretSkipped"
EVENT_REASON_REPLICAS_DELETED = "ReplicasDeleted"
