import logging

import kopf

from meshboard.configuration import configuration


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_):
    settings.peering.standalone = True
    settings.posting.level = logging.INFO
    settings.posting.enabled = False
    settings.execution.max_workers = 10
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(
        prefix="meshboard.dev",
        key="last-handled-configuration",
    )
    settings.persistence.finalizer = "meshboard.dev/kopf-finalizer"
    settings.admission.server = kopf.WebhookServer(
        port=configuration.WEBHOOK_PORT,
        certfile=configuration.WEBHOOK_CERTFILE,
        pkeyfile=configuration.WEBHOOK_PKEYFILE,
        host=configuration.WEBHOOK_HOST,
    )
