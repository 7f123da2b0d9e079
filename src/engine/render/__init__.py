"""
どこで: `engine.render` サブパッケージ。
何を: ワールド座標 → 画面座標の透視投影、グリッド/軌跡の頂点生成、pyglet によるシーン描画。
なぜ: アニメーション状態（位置/色/履歴）と描画技術の依存を分離し、純粋な幾何部分を単体で検証できるようにするため。
"""
