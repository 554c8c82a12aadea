"""
Resolution pipeline.

    START -> policy_override --hit--> END
             policy_override --miss--> faq_match -> answer_assembly -> END

Policy resolution always finishes before FAQ matching starts. All
collaborators are injected; the compiled graph holds no request state.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from langgraph.graph import END, START, StateGraph

from support_resolver.config.settings import Settings
from support_resolver.dataset.schema import FaqEntry
from support_resolver.integrations.embeddings import EmbeddingClient
from support_resolver.integrations.llm import TextGenerator
from support_resolver.logging_config import logger
from support_resolver.observability.tracing import observe
from support_resolver.pipeline.state import State
from support_resolver.services.answer import AnswerAssembler, AnswerStyle
from support_resolver.services.embedding_cache import EmbeddingCache
from support_resolver.services.faq.resolver import FaqMatchResolver
from support_resolver.services.policy.resolver import PolicyOverrideResolver
from support_resolver.services.policy.rules import POLICIES, PolicyRule


@dataclass(frozen=True)
class MatchedSource:
    question: str
    category: str


@dataclass
class ResolveResult:
    answer: str
    matched_sources: List[MatchedSource] = field(default_factory=list)
    policy_id: Optional[str] = None
    policy_method: Optional[str] = None


class SupportPipeline:
    def __init__(
        self,
        cache: EmbeddingCache,
        policy_resolver: PolicyOverrideResolver,
        faq_resolver: FaqMatchResolver,
        assembler: AnswerAssembler,
    ):
        self.cache = cache
        self.policy_resolver = policy_resolver
        self.faq_resolver = faq_resolver
        self.assembler = assembler
        self.graph = self._build_graph()

    def _build_graph(self):
        workflow = StateGraph(State)

        workflow.add_node("policy_override", self._policy_override)
        workflow.add_node("faq_match", self._faq_match)
        workflow.add_node("answer_assembly", self._answer_assembly)

        workflow.add_edge(START, "policy_override")
        workflow.add_conditional_edges(
            "policy_override",
            self._route_after_policy,
            {"hit": END, "miss": "faq_match"},
        )
        workflow.add_edge("faq_match", "answer_assembly")
        workflow.add_edge("answer_assembly", END)

        return workflow.compile()

    # === Nodes ===

    async def _policy_override(self, state: State) -> Dict[str, Any]:
        policy = await self.policy_resolver.resolve(state.get("question", ""))
        if policy.hit:
            return {"policy": policy, "answer": policy.answer}
        return {"policy": policy}

    @staticmethod
    def _route_after_policy(state: State) -> str:
        policy = state.get("policy")
        return "hit" if policy is not None and policy.hit else "miss"

    async def _faq_match(self, state: State) -> Dict[str, Any]:
        return {"matches": await self.faq_resolver.find_matches(state.get("question", ""))}

    async def _answer_assembly(self, state: State) -> Dict[str, Any]:
        answer = await self.assembler.assemble(state.get("question", ""), state.get("matches", []))
        return {"answer": answer}

    # === Entry point ===

    @observe(name="resolve_question")
    async def resolve(self, question: Optional[str]) -> ResolveResult:
        """
        Resolve one user question to an answer.

        Raises:
            GenerationError: when the answer had to be generated and the
                generator failed. Every other failure degrades to no hit /
                no match.
        """
        final = await self.graph.ainvoke({"question": question or ""})

        policy = final.get("policy")
        if policy is not None and policy.hit:
            return ResolveResult(
                answer=policy.answer,
                policy_id=policy.policy_id.value,
                policy_method=policy.method.value,
            )

        matches = final.get("matches", [])
        logger.info("Question resolved", extra={"matches": len(matches)})
        return ResolveResult(
            answer=final["answer"],
            matched_sources=[MatchedSource(question=m.question, category=m.category) for m in matches],
        )


def build_pipeline(
    settings: Settings,
    embedder: EmbeddingClient,
    generator: TextGenerator,
    entries: Iterable[FaqEntry],
    rules: Sequence[PolicyRule] = POLICIES,
) -> SupportPipeline:
    """Wire cache, resolvers and assembler from settings and the two capabilities."""
    cache = EmbeddingCache(embedder, entries, rules)
    style = AnswerStyle(
        brand=settings.BRAND_NAME,
        tone=settings.ANSWER_TONE,
        clarity=settings.ANSWER_CLARITY,
        focus=settings.ANSWER_FOCUS,
    )
    return SupportPipeline(
        cache=cache,
        policy_resolver=PolicyOverrideResolver(cache, embedder),
        faq_resolver=FaqMatchResolver(
            cache,
            embedder,
            lexical_threshold=settings.FAQ_LEXICAL_THRESHOLD,
            semantic_threshold=settings.FAQ_SEMANTIC_THRESHOLD,
        ),
        assembler=AnswerAssembler(generator, style=style, exact_answer=settings.EXACT_ANSWER),
    )
