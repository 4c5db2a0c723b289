import pytest

from apic import Request, Response, chain, new_request


def tracing(name: str, trace: list[str]):
    def intercept(do):
        async def execute(request: Request) -> Response:
            trace.append(f"{name}:in")
            response = await do(request)
            trace.append(f"{name}:out")
            return response

        return execute

    return intercept


class TestChain:
    @pytest.mark.asyncio
    async def test_last_interceptor_is_outermost(self):
        trace: list[str] = []

        async def executor(request: Request) -> Response:
            trace.append("E")
            return Response(status_code=200)

        do = chain(executor, tracing("B", trace), tracing("A", trace))
        await do(new_request("GET", "https://example.com"))

        assert trace == ["A:in", "B:in", "E", "B:out", "A:out"]

    @pytest.mark.asyncio
    async def test_no_interceptors_returns_executor(self):
        async def executor(request: Request) -> Response:
            return Response(status_code=204)

        assert chain(executor) is executor

    @pytest.mark.asyncio
    async def test_interceptor_can_replace_result(self):
        def override(do):
            async def execute(request):
                await do(request)
                return Response(status_code=418)

            return execute

        async def executor(request: Request) -> Response:
            return Response(status_code=200)

        response = await chain(executor, override)(new_request("GET", "https://example.com"))

        assert response.status_code == 418
