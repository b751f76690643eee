import logging

logger = logging.getLogger("wds_client")
