from pytest_archon import archrule


def test_translation_layer_is_transport_free() -> None:
    """
    Filter decoding, option resolution and result encoding must not depend on
    the pod transport or the process entry point.
    """
    (
        archrule("translation_is_transport_free")
        .match(
            "netpod_mongo.decoding",
            "netpod_mongo.options",
            "netpod_mongo.serialization",
        )
        .should_not_import("netpod_mongo.pod")
        .should_not_import("netpod_mongo.handlers")
        .should_not_import("netpod_mongo.__main__")
        .check("netpod_mongo")
    )


def test_operations_do_not_know_the_transport() -> None:
    """
    Operations take an explicit optional options bag; the arity convention
    lives in the handlers only.
    """
    (
        archrule("operations_are_transport_free")
        .match("netpod_mongo.operations")
        .should_not_import("netpod_mongo.pod")
        .should_not_import("netpod_mongo.handlers")
        .check("netpod_mongo")
    )


def test_pod_is_store_agnostic() -> None:
    """
    The transport serves whatever DescribeResponse it is given; it must not
    reach into the driver or the operations directly.
    """
    (
        archrule("pod_is_store_agnostic")
        .match("netpod_mongo.pod")
        .should_not_import("netpod_mongo.operations")
        .should_not_import("motor*")
        .check("netpod_mongo")
    )
