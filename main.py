"""Entry point for the Thumbnail Generation Service."""

if __name__ == "__main__":
    import uvicorn
    from thumbgen.core.config import settings

    print(f"🚀 Starting {settings.api_title} v{settings.api_version}")
    print(f"🎨 Image model: {settings.image_model} ({settings.image_size})")
    print(f"🔧 Max concurrent generations: {settings.max_concurrent_generations}")
    print(f"🗂️  Pattern cache TTL: {settings.pattern_cache_ttl_hours}h")
    print(f"📝 Log level: {settings.log_level}")

    uvicorn.run(
        "thumbgen.main:app",  # Use string import for hot reload
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
