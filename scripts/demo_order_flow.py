"""Producer/consumer demo: two services share one "Order Processing" flow.

The order service starts the flow and records what it expects; the
fulfilment service looks the flow up by order id, records what it observed
and finishes it. The last step deliberately drifts so the result shows a
discrepancy.

Usage:
    FLOWTRACK_DATABASE_URL=sqlite+aiosqlite:///flows.db \
        python -m scripts.demo_order_flow [order_id]
"""

import asyncio
import random
import sys

from flowtrack import FlowClient, FlowSettings
from flowtrack.shared.telemetry.logging import setup_logging

FLOW_NAME = "Order Processing"


async def order_service(settings: FlowSettings, order_id: str) -> None:
    """Service A: starts the flow and records expectations."""
    async with FlowClient(
        settings.model_copy(update={"service_name": "Service A (Order System)"})
    ) as client:
        flow = await client.start(FLOW_NAME, order_id)
        print(f"[A] started flow '{FLOW_NAME}' for {order_id}: {flow.get_flow_info().status}")
        await flow.create_point(
            "Step 1: Order Received",
            {"status": "PENDING", "total": 150.50, "customer_id": "CUST-99"},
        )
        await flow.create_point(
            "Step 2: Risk Analysis",
            {"risk_score": 0.05, "approved": True, "source": "internal-ai"},
        )
        await flow.create_point(
            "Step 3: Payment",
            {"provider": "Stripe", "status": "CAPTURED", "amount": 150.50},
        )


async def fulfilment_service(settings: FlowSettings, order_id: str) -> None:
    """Service B: records observations and finishes the flow."""
    async with FlowClient(
        settings.model_copy(update={"service_name": "Service B (Fulfilment)"})
    ) as client:
        flow = await client.get_flow(FLOW_NAME, order_id)
        await flow.add_assertion(
            {"status": "PENDING", "total": 150.50, "customer_id": "CUST-99"}
        )
        await flow.add_assertion(
            {"risk_score": 0.05, "approved": True, "source": "internal-ai"}
        )
        await flow.add_assertion(
            {"provider": "Stripe", "status": "DECLINED", "amount": 150.50}
        )
        result = await flow.finish()

    print(f"[B] finished: success={result.success} errors={result.error_count} "
          f"in {result.execution_time}")
    for d in result.discrepancies:
        print(f"    - {d.description}: {d.diff}")


async def main() -> None:
    settings = FlowSettings()
    setup_logging(settings.debug)
    order_id = sys.argv[1] if len(sys.argv) > 1 else f"ORDER-{random.randint(0, 99999)}"
    await order_service(settings, order_id)
    await fulfilment_service(settings, order_id)


if __name__ == "__main__":
    asyncio.run(main())
