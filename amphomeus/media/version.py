AMPHOMEUS_MEDIA_VERSION = "0.1.0"
