# saas_architect/orchestrator.py
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from saas_architect import monitoring
from saas_architect.db import GenerationStore
from saas_architect.processors.mock_generator import generate_mock_blueprint
from saas_architect.providers import ProviderAdapter, build_adapters
from saas_architect.schemas import GenerateRequest

MOCK_SOURCE = "mock"


class GenerationOrchestrator:
    def __init__(
        self,
        adapters: List[ProviderAdapter],
        store: GenerationStore,
        mock_generator: Callable[[GenerateRequest], Dict[str, Any]] = generate_mock_blueprint,
    ):
        self.adapters = list(adapters)
        self.store = store
        self.mock_generator = mock_generator

    async def _first_blueprint(self, request: GenerateRequest) -> Tuple[Dict[str, Any], str]:
        """Walk the fallback chain; returns (blueprint, source)."""
        for adapter in self.adapters:
            if not adapter.is_configured:
                monitoring.logger.info("Skipping unconfigured provider", extra={"provider": adapter.name})
                continue
            monitoring.logger.info("Trying provider", extra={"provider": adapter.name, "model": adapter.model})
            result = await adapter.attempt(request)
            if result.ok:
                monitoring.logger.info("Provider succeeded", extra={"provider": adapter.name})
                return result.blueprint, adapter.name
            monitoring.logger.warning(
                "Provider failed, falling back",
                extra={"provider": adapter.name, "reason": result.reason, "detail": result.detail[:500]},
            )
        monitoring.logger.info("No provider produced a blueprint, using mock")
        return self.mock_generator(request), MOCK_SOURCE

    async def generate(self, request: GenerateRequest) -> Dict[str, Any]:
        """
        Full flow:
        1. Try each configured provider in order (first success wins)
        2. Fall back to the deterministic mock blueprint
        3. Tag with provenance (_source, _isMock)
        4. Persist and return {id, data, isMock}

        Only PersistenceError escapes; provider trouble never does.
        """
        blueprint, source = await self._first_blueprint(request)
        is_mock = source == MOCK_SOURCE
        tagged = dict(blueprint)
        tagged["_source"] = source
        tagged["_isMock"] = is_mock

        record = await run_in_threadpool(self.store.create, {
            "idea": request.idea,
            "roles_input": ", ".join(request.roles),
            "monetization_type": request.monetization.value,
            "tenant_type": request.tenant_type.value,
            "tech_stack": list(request.tech_stack),
            "ai_response": tagged,
        })
        monitoring.inc_generation(source)
        monitoring.logger.info("Generation stored", extra={"generation_id": record["id"], "source": source})
        return {"id": record["id"], "data": tagged, "isMock": is_mock}

    async def get_generation(self, generation_id: str) -> Optional[Dict[str, Any]]:
        return await run_in_threadpool(self.store.find_by_id, generation_id)

    async def list_generations(self) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self.store.find_all)


def build_orchestrator(store: Optional[GenerationStore] = None) -> GenerationOrchestrator:
    """Wire adapters from the environment and the SQL-backed store."""
    return GenerationOrchestrator(adapters=build_adapters(), store=store or GenerationStore())
