"""Blog — page caching for a small blog.

Demonstrates loading cache policies from a plain settings dict, a named
backend service, compressed storage, and a store filter that keeps
error pages out of the cache.

Run:
    python app.py
"""

import anyio

from routecache import CacheConfig, MemoryBackend, Pipeline, Request, Response, ResponseCache

POSTS = {
    "1": "Hello, world",
    "2": "Caching named routes",
}

SETTINGS = {
    "slm_cache": {
        "cache_prefix": "blog_",
        "cache": "page_cache",
        "use_compression": True,
        "routes": {
            "blog.index": {"match_method": ["GET", "HEAD"]},
            "blog.show": {"match_method": "GET"},
            "docs.page": {"match_route_params": {"lang": ["en", "fr"]}},
        },
    },
}

pipeline = Pipeline()
services = {"page_cache": MemoryBackend(ttl=300, max_entries=512)}
renders: list[str] = []


@pipeline.route("/", name="blog.index")
def index():
    renders.append("index")
    items = "".join(f"<li>{title}</li>" for title in POSTS.values())
    return f"<ul>{items}</ul>"


@pipeline.route("/posts/{id}", methods=("GET", "POST"), name="blog.show")
def show(id: str):
    renders.append(f"post:{id}")
    title = POSTS.get(id)
    if title is None:
        return Response("No such post", status=404)
    return f"<h1>{title}</h1>"


@pipeline.route("/docs/{lang}", name="docs.page")
def docs(lang: str):
    renders.append(f"docs:{lang}")
    return f"<p>docs ({lang})</p>"


config = CacheConfig.from_mapping(SETTINGS, store_filter=lambda response: response.status < 400)
cache = ResponseCache.from_config(config, services=services)
cache.attach(pipeline)


async def main() -> None:
    for path in ("/", "/", "/posts/1", "/posts/1", "/docs/de"):
        response = await pipeline(Request("GET", path))
        print(path, response.status, response.header_values("X-Slm-Cache"))


if __name__ == "__main__":
    anyio.run(main)
