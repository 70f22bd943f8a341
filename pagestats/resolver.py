from typing import Dict, Iterable, List

from .models import LogicalLoadEvent, TransportByteEvent


def transferred_size(byte_event: TransportByteEvent) -> int:
    """
    传输大小取值规则：
    encodedDataLength (压缩后/网络消耗) 大于 0 时使用它，否则退回 dataLength
    """
    if byte_event.encoded_length > 0:
        return byte_event.encoded_length
    return byte_event.raw_length


def index_by_request(byte_events: Iterable[TransportByteEvent]) -> Dict[str, TransportByteEvent]:
    # 同一 requestId 的多个事件：后到的覆盖先到的 (长度是累计值，不能相加)
    latest = {}
    for event in byte_events:
        latest[event.request_id] = event
    return latest


def resolve_sizes(events: List[LogicalLoadEvent],
                  byte_events: Iterable[TransportByteEvent]) -> List[LogicalLoadEvent]:
    """
    按 requestId 把字节事件关联到资源上，填充 size。
    只能在页面加载结束 (网络空闲) 之后调用一次；找不到字节事件的资源 size 保持 0。
    """
    latest = index_by_request(byte_events)
    for event in events:
        received = latest.get(event.request_id)
        if received is not None:
            event.size = transferred_size(received)
    return events
