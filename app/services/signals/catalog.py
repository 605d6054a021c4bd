"""Startups the terminal tracks by default."""

from __future__ import annotations

from typing import Final

from app.models.startup_signal import ActionTag, TrackedStartup

# GitHub usernames are public sample accounts until real founders are mapped.
TRACKED_STARTUPS: Final[tuple[TrackedStartup, ...]] = (
    TrackedStartup(
        id=1,
        name="NeuroLink AI",
        pitch="Brain-computer interface for productivity enhancement",
        industry="AI/ML",
        region="North America",
        source="GitHub",
        team="Ex-Neuralink engineers",
        founder_background="PhD in Neuroscience, Stanford",
        github_username="octocat",
        product_hunt_slug="neurolink-ai",
        website_url="https://neurolink-ai.com",
        action_tag=ActionTag.BUILD,
        estimated_build_cost=250_000,
        india_market_fit=6,
    ),
    TrackedStartup(
        id=2,
        name="CropSense",
        pitch="IoT sensors for precision agriculture in emerging markets",
        industry="AgTech",
        region="Asia",
        source="ProductHunt",
        team="IIT Delhi alumni",
        founder_background="Agricultural Engineering, 10+ years farming",
        github_username="defunkt",
        product_hunt_slug="cropsense",
        website_url="https://cropsense.in",
        action_tag=ActionTag.SCOUT,
        estimated_build_cost=75_000,
        india_market_fit=9,
    ),
    TrackedStartup(
        id=3,
        name="QuantumSecure",
        pitch="Quantum-resistant encryption for financial institutions",
        industry="FinTech",
        region="Europe",
        source="Reddit",
        team="Ex-IBM Quantum team",
        founder_background="PhD Quantum Computing, MIT",
        github_username="pjhyett",
        product_hunt_slug="quantumsecure",
        website_url="https://quantumsecure.com",
        action_tag=ActionTag.STORE,
        estimated_build_cost=500_000,
        india_market_fit=7,
    ),
    TrackedStartup(
        id=4,
        name="MediChain",
        pitch="Blockchain-based medical records for rural healthcare",
        industry="HealthTech",
        region="Asia",
        source="Twitter",
        team="Healthcare + Blockchain experts",
        founder_background="MD + Computer Science, AIIMS",
        github_username="mojombo",
        action_tag=ActionTag.BUILD,
        estimated_build_cost=120_000,
        india_market_fit=8,
    ),
    TrackedStartup(
        id=5,
        name="EcoLogistics",
        pitch="Carbon-neutral last-mile delivery optimization",
        industry="Logistics",
        region="Global",
        source="GitHub",
        team="Ex-Amazon logistics team",
        founder_background="Operations Research, Wharton MBA",
        github_username="wycats",
        action_tag=ActionTag.SCOUT,
        estimated_build_cost=90_000,
        india_market_fit=7,
    ),
)
