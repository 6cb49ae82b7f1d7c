AMPHOMEUS_TAGS_VERSION = "0.1.0"
